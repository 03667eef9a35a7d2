from apartments_sync.main import main

raise SystemExit(main())
