from trackduel.cli import main

main()
