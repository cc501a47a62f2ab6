"""UI binding port: read/subscribe adapter and per-component atom views."""

from aviator.binding.port import AtomView, BindingPort

__all__ = ["AtomView", "BindingPort"]
