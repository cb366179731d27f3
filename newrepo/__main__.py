from newrepo.cli import main

raise SystemExit(main())
