"""Policy — how findings translate into CI exit codes."""
