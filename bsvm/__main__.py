from bsvm.cli.app import main

main()
