from wallet_keeper.cli import main

raise SystemExit(main())
