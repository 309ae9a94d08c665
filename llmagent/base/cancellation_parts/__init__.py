"""Single-class modules backing ``llmagent.base.cancellation``."""
