from assetgateway.main import main

main()
