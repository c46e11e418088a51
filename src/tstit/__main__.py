from tstit.cli.main import main

raise SystemExit(main())
