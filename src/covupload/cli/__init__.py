"""covupload command line interface."""
