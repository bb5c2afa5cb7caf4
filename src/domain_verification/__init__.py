"""Customer domain verification flow."""
