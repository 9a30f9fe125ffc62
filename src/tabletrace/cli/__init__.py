"""tabletrace command line interface."""
