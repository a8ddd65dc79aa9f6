"""Synthetic git repositories: archive extraction, class-file inspection,
git pipelines, commit construction and tag reconciliation."""
