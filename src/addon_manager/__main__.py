from addon_manager.cli import main

raise SystemExit(main())
