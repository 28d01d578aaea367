"""IPKey: a hardware key that shows your public IP address."""

__version__ = "1.0.0"
