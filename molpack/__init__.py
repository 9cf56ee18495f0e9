"""Package a Modelica library directory into a .mol container with a generated manifest."""

__version__ = "0.1.0"