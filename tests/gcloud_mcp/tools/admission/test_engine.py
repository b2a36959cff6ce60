"""Tests for the admission decision engine."""

import pytest

from gcloud_mcp.schema import CliResult, Decision, DenialKind
from gcloud_mcp.tools.gcloud.errors import MalformedLintOutputError


class TestAdmissionEngine:
    def test_allows_unlisted_command(self, make_engine, fake_gcloud):
        engine = make_engine(deny=["compute list"])
        verdict = engine.evaluate(["compute", "create"])

        assert verdict.allowed
        assert verdict.decision == Decision.ALLOWED
        assert verdict.command_path == "compute create"
        assert fake_gcloud.executed == []

    def test_lints_without_program_name_duplication(self, make_engine, fake_gcloud):
        engine = make_engine()
        engine.evaluate(["gcloud", "config", "list"])
        assert fake_gcloud.lint_calls == ["config list"]

    def test_syntax_invalid_is_denied_without_fallback(self, make_engine, fake_gcloud):
        fake_gcloud.invalid.add("beta compute instancez list")
        engine = make_engine(deny=["beta compute"])

        verdict = engine.evaluate(["beta", "compute", "instancez", "list"])

        assert verdict.decision == Decision.DENIED
        assert verdict.kind == DenialKind.SYNTAX_INVALID
        assert "Invalid command" in verdict.reason
        assert "Do not retry this exact command" in verdict.reason
        assert fake_gcloud.lint_calls == ["beta compute instancez list"]

    def test_empty_command_is_rejected_without_lint(self, make_engine, fake_gcloud):
        verdict = make_engine().evaluate(["gcloud"])
        assert verdict.kind == DenialKind.SYNTAX_INVALID
        assert fake_gcloud.calls == []

    def test_allowlist_miss(self, make_engine, fake_gcloud):
        engine = make_engine(allow=["compute list"])
        verdict = engine.evaluate(["compute", "create"])

        assert verdict.decision == Decision.DENIED
        assert verdict.kind == DenialKind.ALLOWLIST_MISS
        assert "not on the allow list" in verdict.reason
        assert '["gcloud-mcp", "debug", "config"]' in verdict.reason
        assert fake_gcloud.lint_calls == ["compute create"]
        assert fake_gcloud.executed == []

    def test_allowlisted_command_still_checks_default_denylist(self, make_engine):
        engine = make_engine(allow=["compute"])
        verdict = engine.evaluate(["compute", "ssh", "my-vm"])
        assert verdict.kind == DenialKind.DENYLIST_HIT

    def test_denylist_hit_without_alternative(self, make_engine):
        engine = make_engine(deny=["compute list"])
        verdict = engine.evaluate(["compute", "list", "--zone", "eastus1"])

        assert verdict.decision == Decision.DENIED
        assert verdict.kind == DenialKind.DENYLIST_HIT
        assert verdict.suggested_alternative is None
        assert "on the deny list" in verdict.reason
        assert "To get the user-specified deny list" in verdict.reason
        for default in ("interactive", "compute ssh"):
            assert f"-  '{default}'" in verdict.reason

    def test_default_denylist_hit_omits_user_hint(self, make_engine):
        engine = make_engine()
        verdict = engine.evaluate(["interactive"])
        assert verdict.kind == DenialKind.DENYLIST_HIT
        assert "user-specified" not in verdict.reason

    def test_denied_ga_command_denies_prerelease_variants(self, make_engine):
        engine = make_engine(deny=["compute instances delete"])
        verdict = engine.evaluate(["alpha", "compute", "instances", "delete", "vm"])
        assert verdict.decision == Decision.DENIED

    def test_beta_denied_suggests_ga(self, make_engine, fake_gcloud):
        engine = make_engine(deny=["beta compute instances list"])
        verdict = engine.evaluate(["beta", "compute", "instances", "list"])

        assert verdict.decision == Decision.DENIED_WITH_SUGGESTION
        assert verdict.suggested_alternative == "compute instances list"
        assert "'gcloud beta compute instances list'" in verdict.reason
        assert "'gcloud compute instances list'" in verdict.reason
        assert fake_gcloud.executed == []

    def test_alpha_denied_suggests_ga_before_beta(self, make_engine, fake_gcloud):
        engine = make_engine(
            deny=["alpha compute instances list", "beta compute instances list"]
        )
        verdict = engine.evaluate(["alpha", "compute", "instances", "list"])

        assert verdict.suggested_alternative == "compute instances list"
        assert "beta compute instances list" not in fake_gcloud.lint_calls

    def test_suggestion_keeps_positionals_and_flags(self, make_engine, fake_gcloud):
        args = ["beta", "compute", "instances", "describe", "my-vm", "--zone", "us-central1-a"]
        fake_gcloud.canonical[" ".join(args)] = "beta compute instances describe"
        fake_gcloud.canonical[" ".join(args[1:])] = "compute instances describe"
        engine = make_engine(deny=["beta compute instances describe"])

        verdict = engine.evaluate(args)

        assert verdict.command_path == "beta compute instances describe"
        assert (
            verdict.suggested_alternative
            == "compute instances describe my-vm --zone us-central1-a"
        )

    def test_suggestion_ignores_track_named_flag_value(self, make_engine, fake_gcloud):
        args = ["--project", "alpha", "alpha", "compute", "instances", "list"]
        fake_gcloud.canonical[" ".join(args)] = "alpha compute instances list"
        fake_gcloud.invalid.add("--project alpha compute instances list")
        fake_gcloud.canonical["--project alpha beta compute instances list"] = (
            "beta compute instances list"
        )
        engine = make_engine(deny=["alpha compute instances list"])

        verdict = engine.evaluate(args)

        assert verdict.decision == Decision.DENIED_WITH_SUGGESTION
        assert (
            verdict.suggested_alternative
            == "--project alpha beta compute instances list"
        )

    def test_oracle_failure_propagates(self, make_engine, fake_gcloud):
        fake_gcloud.outputs[
            ("meta", "lint-gcloud-commands", "--command-string", "gcloud config list")
        ] = CliResult(code=0, stdout="[]", stderr="")
        engine = make_engine()
        with pytest.raises(MalformedLintOutputError):
            engine.evaluate(["config", "list"])


class TestDebugConfig:
    def test_is_debug_request(self, make_engine):
        engine = make_engine()
        assert engine.is_debug_request(["gcloud-mcp", "debug", "config"])
        assert not engine.is_debug_request(["config", "list"])

    def test_describes_denylist(self, make_engine):
        engine = make_engine(deny=["compute list", "Projects.Delete"])
        assert engine.describe_config() == (
            "# The user has the following commands denylisted:\n"
            "- compute list\n"
            "- Projects.Delete"
        )

    def test_describes_allowlist(self, make_engine):
        engine = make_engine(allow=["compute list"])
        assert engine.describe_config() == (
            "# The user has the following commands allowlisted:\n- compute list"
        )
