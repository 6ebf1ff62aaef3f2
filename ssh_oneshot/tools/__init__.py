"""MCP tools for ssh_oneshot."""

from ssh_oneshot.tools.remote import ssh_run, ssh_upload

__all__ = ["ssh_run", "ssh_upload"]
