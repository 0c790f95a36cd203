"""ExteriorCRM command line interface."""
