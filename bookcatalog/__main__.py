from bookcatalog.api.main import main

main()
