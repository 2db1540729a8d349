"""Engine detection, dispatch and output emission."""
