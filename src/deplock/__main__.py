from deplock.cli import main

raise SystemExit(main())
