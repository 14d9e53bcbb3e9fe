from goldenpath.cli import main

raise SystemExit(main())
