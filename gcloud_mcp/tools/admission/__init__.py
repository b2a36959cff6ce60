"""Admission control for gcloud commands."""
