from illien.main import main

raise SystemExit(main())
