"""
Core package for the audio-weather service.

This package stages an uploaded voice recording, transcribes it, looks up
the forecast for the caller's coordinates and asks a language model for a
short weather answer in Spanish.
"""
