from slackbridge.server import main

main()
