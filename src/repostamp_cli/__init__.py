"""repostamp command line interface."""
