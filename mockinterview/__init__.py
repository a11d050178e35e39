"""
MockInterview Proctor - Proctored AI Mock Interview Session Runner

Captures spoken answers, samples webcam frames and microphone loudness,
flags exam malpractice with a debounced alert policy, and autosaves
in-progress interviews so they can be resumed.
"""

__version__ = "0.1.0"
__author__ = "MockInterview Proctor Team"
