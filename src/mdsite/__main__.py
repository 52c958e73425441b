from mdsite.server import main

main()
