from hephaestus.cli import main

raise SystemExit(main())
