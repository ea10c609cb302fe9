from brightness_ctl.cli import main

raise SystemExit(main())
