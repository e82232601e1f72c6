"""
SonicSlice - cut ranges out of audio recordings and join them back together.
"""
__version__ = "0.1.0"
