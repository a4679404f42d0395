"""moving: order intake and customer reviews for a moving company, over gRPC and HTTP."""

__version__ = "0.1.0"
