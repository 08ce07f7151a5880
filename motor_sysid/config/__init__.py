"""Settings for identification runs."""
