from tmuxpanes.app import main

main()
