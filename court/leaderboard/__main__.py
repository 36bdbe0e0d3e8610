from court.leaderboard import main

main()
