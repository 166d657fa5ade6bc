from __future__ import annotations

from minikube.cmd.root import main

if __name__ == "__main__":
    raise SystemExit(main())
