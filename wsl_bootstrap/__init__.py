"""WSL workstation bootstrap (reboot-resumable).

Core design goals:
- Resumable across the one reboot that feature enablement needs
- Idempotent steps
- No residue once the workflow completes
- External tools behind small capability classes
- Centralized logging
"""

__all__ = []
