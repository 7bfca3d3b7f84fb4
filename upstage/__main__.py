from upstage.cli import main

main()
