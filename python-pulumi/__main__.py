import ec2docker.pulumi_resources.ec2_docker_application

ec2docker.pulumi_resources.ec2_docker_application.EC2DockerApplication.autoload()
