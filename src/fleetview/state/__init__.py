"""State layer.

This package holds the immutable view state of the device screen and the
policy that decides whether a completed request may still be applied to it.
Only :class:`fleetview.device_view.DeviceView` replaces the state.
"""
