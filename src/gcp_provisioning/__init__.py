"""Google Cloud Platform customer provisioning flow."""
