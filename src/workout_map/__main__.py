from workout_map.main import main

main()
