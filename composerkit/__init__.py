"""Detect, install and run the PHP Composer dependency manager, with helpers for repositories, projects, Satis and validation."""

__version__ = "0.1.0"