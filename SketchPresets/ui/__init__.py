"""User interface package: application, main window, shared signals and dock widget base."""
