"""Google Workspace customer provisioning flow."""
