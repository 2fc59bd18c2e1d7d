from hammer.cli import main

raise SystemExit(main())
