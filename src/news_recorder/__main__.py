from news_recorder.cli import main

main()
