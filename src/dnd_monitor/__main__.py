from dnd_monitor.main import main

main()
