from reddit_relay.main import main

main()
