"""PT Record - scheduling and record keeping for personal trainers and their members"""

__version__ = "1.0.0"
