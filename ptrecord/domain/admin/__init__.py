"""Admin domain - account audit, pruning and usage statistics"""
