from vecalc.repl import main

raise SystemExit(main())
