from concatenatrix.cli import main

raise SystemExit(main())
