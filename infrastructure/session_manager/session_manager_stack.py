"""
Session Manager Demo Stack

Three-tier VPC (ingress, application, isolated) with one EC2 instance per
tier, all reachable through Systems Manager Session Manager instead of SSH.
Interface endpoints let the isolated tier reach SSM without internet egress.
An Aurora MySQL cluster can optionally be placed in the isolated tier.
"""
from aws_cdk import (
    Stack,
    Tags,
    CfnOutput,
    RemovalPolicy,
    aws_ec2 as ec2,
    aws_iam as iam,
    aws_rds as rds,
)
from constructs import Construct

# Subnet group names, also used as the aws-cdk:subnet-name tag
INGRESS_SUBNET_NAME = "ingress"
APPLICATION_SUBNET_NAME = "application"
ISOLATED_SUBNET_NAME = "rds"

WEB_PORT = 80
APP_PORT = 8080
MYSQL_PORT = 3306


class SessionManagerDemoStack(Stack):
    """
    Stack declaring the Session Manager demo topology.

    Variants:
    - include_database: adds the Aurora cluster and its security groups
    - include_public_instance: adds the ingress-tier EC2 instance
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        include_database: bool = True,
        include_public_instance: bool = True,
        vpc_cidr: str = "10.0.0.0/16",
        nat_gateways: int = 1,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Tag all resources in this stack
        Tags.of(self).add("project", "session-manager-demo")

        # Create VPC: one subnet per tier in each of 2 AZs
        # Application tier shares the NAT gateway(s); the rds tier gets no internet route
        vpc = ec2.Vpc(
            self,
            "SessionManagerDemoStackVPC",
            ip_addresses=ec2.IpAddresses.cidr(vpc_cidr),
            max_azs=2,
            nat_gateways=nat_gateways,
            subnet_configuration=[
                ec2.SubnetConfiguration(
                    name=INGRESS_SUBNET_NAME,
                    subnet_type=ec2.SubnetType.PUBLIC,
                ),
                ec2.SubnetConfiguration(
                    name=APPLICATION_SUBNET_NAME,
                    subnet_type=ec2.SubnetType.PRIVATE_WITH_EGRESS,
                ),
                ec2.SubnetConfiguration(
                    name=ISOLATED_SUBNET_NAME,
                    subnet_type=ec2.SubnetType.PRIVATE_ISOLATED,
                ),
            ],
        )

        # IAM role shared by every instance; Session Manager access only, no SSH keys
        ec2_role = iam.Role(
            self,
            "EC2Role",
            assumed_by=iam.ServicePrincipal("ec2.amazonaws.com"),
        )
        ec2_role.add_managed_policy(
            iam.ManagedPolicy.from_aws_managed_policy_name(
                "AmazonSSMManagedInstanceCore"
            )
        )

        # Ingress tier: web traffic from anywhere
        web_sg = ec2.SecurityGroup(
            self,
            "webSG",
            vpc=vpc,
            description="Allow inbound Web App traffic",
            allow_all_outbound=True,
        )
        web_sg.add_ingress_rule(
            ec2.Peer.any_ipv4(),
            ec2.Port.tcp(WEB_PORT),
            "Allow web App traffic",
        )

        # Application tier: only from the ingress tier
        app_sg = ec2.SecurityGroup(
            self,
            "appSG",
            vpc=vpc,
            description="Allow inbound App traffic from the web tier",
            allow_all_outbound=True,
        )
        app_sg.add_ingress_rule(
            web_sg,
            ec2.Port.tcp(APP_PORT),
            "Allow web App traffic",
        )

        # Data tier: only from the application tier
        db_sg = ec2.SecurityGroup(
            self,
            "PrivateIsolatedInstanceSG",
            vpc=vpc,
            description="Allow traffic from App from Private Instance",
            allow_all_outbound=True,
        )
        db_sg.add_ingress_rule(
            app_sg,
            ec2.Port.tcp(MYSQL_PORT),
            "Allow traffic from App Servers",
        )

        instance_type = ec2.InstanceType.of(ec2.InstanceClass.T3, ec2.InstanceSize.SMALL)
        machine_image = ec2.MachineImage.latest_amazon_linux2()

        # Ingress tier instance (optional)
        public_instance = None
        if include_public_instance:
            public_instance = ec2.Instance(
                self,
                "PublicInstance",
                instance_type=instance_type,
                machine_image=machine_image,
                vpc=vpc,
                vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PUBLIC),
                role=ec2_role,
                security_group=web_sg,
            )

        # Application tier instance
        private_instance = ec2.Instance(
            self,
            "PrivateInstance",
            instance_type=instance_type,
            machine_image=machine_image,
            vpc=vpc,
            vpc_subnets=ec2.SubnetSelection(
                subnet_type=ec2.SubnetType.PRIVATE_WITH_EGRESS
            ),
            role=ec2_role,
            security_group=app_sg,
        )

        # Aurora MySQL cluster in the isolated tier (optional)
        database = None
        cluster_security_group = None
        db_security_group = None
        if include_database:
            # The cluster's own group carries no ingress rules
            cluster_security_group = ec2.SecurityGroup(
                self,
                "ClusterSecurityGroup",
                vpc=vpc,
                description="Aurora MySQL cluster security group",
                allow_all_outbound=True,
            )

            # Ad-hoc group admitting MySQL from anywhere in the VPC
            db_security_group = ec2.SecurityGroup(
                self,
                "DbSecurityGroup",
                vpc=vpc,
                description="Allow database access",
                allow_all_outbound=True,
            )
            db_security_group.add_ingress_rule(
                ec2.Peer.ipv4(vpc_cidr),
                ec2.Port.tcp(MYSQL_PORT),
                "Allow Aurora MySQL access",
            )

            node_type = ec2.InstanceType.of(
                ec2.InstanceClass.BURSTABLE3, ec2.InstanceSize.MEDIUM
            )
            # Writer plus one reader: two replicated nodes
            # DESTROY: demo data is dropped with the stack, not for production
            database = rds.DatabaseCluster(
                self,
                "AuroraCluster",
                engine=rds.DatabaseClusterEngine.aurora_mysql(
                    version=rds.AuroraMysqlEngineVersion.VER_3_04_0
                ),
                default_database_name="MyAuroraDatabase",
                writer=rds.ClusterInstance.provisioned(
                    "writer", instance_type=node_type
                ),
                readers=[
                    rds.ClusterInstance.provisioned("reader", instance_type=node_type)
                ],
                vpc=vpc,
                vpc_subnets=ec2.SubnetSelection(
                    subnet_type=ec2.SubnetType.PRIVATE_ISOLATED
                ),
                security_groups=[cluster_security_group, db_security_group],
                removal_policy=RemovalPolicy.DESTROY,
                deletion_protection=False,
            )

        # Isolated tier instance
        isolated_instance = ec2.Instance(
            self,
            "PrivateIsolatedInstance",
            instance_type=instance_type,
            machine_image=machine_image,
            vpc=vpc,
            vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PRIVATE_ISOLATED),
            role=ec2_role,
            security_group=db_sg,
        )

        # Interface endpoints so the isolated tier can reach Session Manager
        endpoint_subnets = ec2.SubnetSelection(
            subnet_type=ec2.SubnetType.PRIVATE_ISOLATED,
            one_per_az=True,
        )
        endpoints = {}
        for endpoint_id, service in (
            ("SSMEndpoint", ec2.InterfaceVpcEndpointAwsService.SSM),
            ("SSM_MESSAGESEndpoint", ec2.InterfaceVpcEndpointAwsService.SSM_MESSAGES),
            ("EC2_MESSAGESEndpoint", ec2.InterfaceVpcEndpointAwsService.EC2_MESSAGES),
        ):
            endpoints[endpoint_id] = ec2.InterfaceVpcEndpoint(
                self,
                endpoint_id,
                service=service,
                vpc=vpc,
                private_dns_enabled=True,
                subnets=endpoint_subnets,
            )
        ssm_endpoint = endpoints["SSMEndpoint"]

        # Outputs
        CfnOutput(
            self,
            "SSMEndpointId",
            value=ssm_endpoint.vpc_endpoint_id,
            description="Systems Manager VPC endpoint ID",
        )

        # Store references for tests and other stacks
        self.vpc = vpc
        self.instance_role = ec2_role
        self.web_security_group = web_sg
        self.app_security_group = app_sg
        self.data_security_group = db_sg
        self.public_instance = public_instance
        self.private_instance = private_instance
        self.isolated_instance = isolated_instance
        self.database = database
        self.cluster_security_group = cluster_security_group
        self.database_security_group = db_security_group
        self.endpoints = endpoints
        self.ssm_endpoint = ssm_endpoint
