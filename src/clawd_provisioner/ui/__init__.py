"""User interface components.

Key modules:
    - reporting: Rich rendering and JSON output of provisioning results
"""

from clawd_provisioner.ui.reporting import (
    print_result,
    render_steps,
    render_summary,
    result_json,
)

__all__ = [
    "print_result",
    "render_steps",
    "render_summary",
    "result_json",
]
