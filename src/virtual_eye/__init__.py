"""
Virtual Eye

Spoken scene guidance for blind and low-vision users: camera frames go
through an object detector in a worker process, detections are enriched and
turned into one prioritized guidance sentence per cycle, and that sentence is
spoken only when it changes.
"""

__version__ = '0.1.0'
