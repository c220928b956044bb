"""OpenGTS client -- reports location fixes to an OpenGTS collector.

Each fix is encoded as a GPRMC sentence and sent with one HTTP GET.
Sends run on a bounded single-worker dispatcher so that callers never
block on the network.
"""

__version__ = "0.1.0"
