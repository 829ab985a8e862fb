BANNER = """
 █████╗ ██╗    ██╗███████╗    ███████╗ ██████╗██████╗      █████╗ ██╗   ██╗██████╗ ██╗████████╗
██╔══██╗██║    ██║██╔════╝    ██╔════╝██╔════╝╚════██╗    ██╔══██╗██║   ██║██╔══██╗██║╚══██╔══╝
███████║██║ █╗ ██║███████╗    █████╗  ██║      █████╔╝    ███████║██║   ██║██║  ██║██║   ██║
██╔══██║██║███╗██║╚════██║    ██╔══╝  ██║     ██╔═══╝     ██╔══██║██║   ██║██║  ██║██║   ██║
██║  ██║╚███╔███╔╝███████║    ███████╗╚██████╗███████╗    ██║  ██║╚██████╔╝██████╔╝██║   ██║
╚═╝  ╚═╝ ╚══╝╚══╝ ╚══════╝    ╚══════╝ ╚═════╝╚══════╝    ╚═╝  ╚═╝ ╚═════╝ ╚═════╝ ╚═╝   ╚═╝

                          EC2 / EBS Compliance Audit
"""
