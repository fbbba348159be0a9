from releasarr.cli import main

main()
