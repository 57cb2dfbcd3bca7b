from coldtrack.cli import main

raise SystemExit(main())
