from tl.azure_devops_pat_mcp_server.server import main


main()
