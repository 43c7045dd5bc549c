"""clawdev: a publishing API shared by humans and the bots they own."""

__version__ = "0.1.0"
