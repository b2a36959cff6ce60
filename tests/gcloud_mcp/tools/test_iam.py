import json

from gcloud_mcp.schema import CliResult
from gcloud_mcp.tools.iam import check_iam_permissions, parse_granted_permissions

TEST_ARGS = (
    "projects",
    "test-iam-permissions",
    "my-project",
    "--permissions=compute.instances.create,storage.buckets.list",
    "--format=json",
)


def test_parse_granted_permissions():
    assert parse_granted_permissions('{"permissions": ["a", "b"]}') == {"a", "b"}
    assert parse_granted_permissions("{}") == set()
    assert parse_granted_permissions("not json") == set()


def test_check_iam_permissions_reports_missing(fake_gcloud):
    fake_gcloud.outputs[TEST_ARGS] = CliResult(
        code=0, stdout=json.dumps({"permissions": ["storage.buckets.list"]}), stderr=""
    )

    result = check_iam_permissions(
        fake_gcloud, "my-project", ["compute.instances.create", "storage.buckets.list"]
    )

    assert not result.is_error
    assert "- ✅ Granted: 1" in result.text
    assert "- ❌ Denied: 1" in result.text
    assert "| compute.instances.create | ❌ Denied |" in result.text
    assert "| storage.buckets.list | ✅ Granted |" in result.text
    assert "## Missing Permissions" in result.text


def test_check_iam_permissions_all_granted(fake_gcloud):
    fake_gcloud.outputs[TEST_ARGS] = CliResult(
        code=0,
        stdout=json.dumps(
            {"permissions": ["compute.instances.create", "storage.buckets.list"]}
        ),
        stderr="",
    )

    result = check_iam_permissions(
        fake_gcloud, "my-project", ["compute.instances.create", "storage.buckets.list"]
    )

    assert "## Missing Permissions" not in result.text


def test_check_iam_permissions_failure(fake_gcloud):
    fake_gcloud.outputs[TEST_ARGS] = CliResult(code=1, stdout="", stderr="PERMISSION_DENIED")

    result = check_iam_permissions(
        fake_gcloud, "my-project", ["compute.instances.create", "storage.buckets.list"]
    )

    assert result.is_error
    assert result.text == "Failed to test permissions: PERMISSION_DENIED"
